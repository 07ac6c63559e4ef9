import sys

from mwlink.utils._conf import ConfMod

# The module replaces itself with a ConfMod instance, so callers can do
#   from mwlink.utils import conf
#   conf.get("linking", "max_length", 2000, int)
# or access sections as attributes: conf.linking.style
sys.modules[__name__] = ConfMod(__name__)
