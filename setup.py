from setuptools import find_packages, setup

setup(
    name="browserfetch",
    version="0.1.0",
    description="Locate downloadable Chromium and Firefox builds for a platform and channel",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "aiohttp",
        "packaging",
        "platformdirs",
        "PyYAML",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "browserfetch=browserfetch.cli:main",
        ],
    },
)
