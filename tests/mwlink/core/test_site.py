import dataclasses

import pytest

from wikis import ENWIKI, RUWIKI, RUWIKT, SITEINFO, make_siteinfo

from mwlink.core.site import MagicWord, SiteDescriptor, normalize_key


@pytest.fixture
def site():
    return SiteDescriptor.from_siteinfo(
        SITEINFO[RUWIKI], RUWIKI, "https://ru.wikipedia.org/w/api.php"
    )


def test_general(site):
    assert site.url_pattern == RUWIKI
    assert site.api_url == "https://ru.wikipedia.org/w/api.php"
    assert site.server == "https://ru.wikipedia.org"
    assert site.main_page == "Заглавная страница"
    assert not site.case_sensitive


def test_namespaces(site):
    user = site.namespaces[2]
    assert user.name == "Участник"
    assert user.canonical == "User"
    assert user.aliases == ("Участница",)
    assert user.names == ("Участник", "User", "Участница")
    assert site.namespaces[0].names == ()


def test_namespace_index(site):
    assert site.namespace_index["обсуждение участницы"] == 3
    assert site.namespace_index["user talk"] == 3
    assert site.namespace_index["вп"] == 4
    assert site.namespace_index["image"] == 6
    assert "" not in site.namespace_index


def test_interwikis(site):
    assert site.interwikis["en"].url == ENWIKI
    assert site.interwikis["wikt"].url == RUWIKT


def test_interwiki_api():
    siteinfo = make_siteinfo("https://wiki.example.org", "Main Page", {0: ""})
    siteinfo["interwikimap"] = [
        {
            "prefix": "Local_Wiki",
            "url": "https://local.example.org/wiki/$1",
            "local": "",
            "api": "https://local.example.org/api.php",
        }
    ]
    site = SiteDescriptor.from_siteinfo(siteinfo, "https://wiki.example.org/wiki/$1", "")
    interwiki = site.interwikis["local wiki"]
    assert interwiki.api == "https://local.example.org/api.php"
    assert site.server == "https://wiki.example.org"


def test_magic_words(site):
    assert site.magic_words["subst"].aliases == ("ПОДСТ:", "ПОДСТАНОВКА:", "SUBST:")
    assert not site.magic_words["subst"].case_sensitive
    assert site.magic_words["currentyear"].case_sensitive


def test_case_sensitive_wiki():
    site = SiteDescriptor.from_siteinfo(SITEINFO[RUWIKT], RUWIKT, "")
    assert site.case_sensitive
    assert site.namespaces[0].case_sensitive


def test_missing_tables():
    site = SiteDescriptor.from_siteinfo(
        {"general": {"mainpage": "Main Page"}, "namespaces": {}}, ENWIKI, ""
    )
    assert dict(site.interwikis) == {}
    assert dict(site.magic_words) == {}
    assert site.server == ""


def test_descriptor_is_immutable(site):
    with pytest.raises(dataclasses.FrozenInstanceError):
        site.main_page = "Foo"
    with pytest.raises(TypeError):
        site.namespaces[100] = None


def test_normalize_key():
    assert normalize_key("  Обсуждение__участника ") == "обсуждение участника"
    assert normalize_key("User_talk") == "user talk"


def test_magic_word_prefix_alias():
    word = MagicWord("subst", ("SUBST:",))
    assert word.match("subst:Foo") == "SUBST:"
    assert word.match("SUBST:") == "SUBST:"
    assert word.match("substitute") is None


def test_magic_word_function_alias():
    word = MagicWord("if", ("if",))
    assert word.match("if:x") == "if"
    assert word.match("IF") == "if"
    assert word.match("iffy") is None


def test_magic_word_case_sensitive():
    word = MagicWord("pagename", ("PAGENAME",), case_sensitive=True)
    assert word.match("PAGENAME") == "PAGENAME"
    assert word.match("PAGENAME:Foo") == "PAGENAME"
    assert word.match("pagename") is None
    assert word.match("PAGENAMEE") is None
