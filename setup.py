from setuptools import setup


def main():
    # metadata, dependencies and package discovery live in pyproject.toml
    setup(zip_safe=False)


if __name__ == "__main__":
    main()
