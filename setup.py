from setuptools import setup, find_packages

setup(
    name="feedscout",
    version="1.0.0",
    description="Feed autodiscovery — find the RSS/Atom feeds behind any web page",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests>=2.31.0",
        "beautifulsoup4>=4.12.0",
        "feedparser>=6.0.0",
        "rich>=13.0.0",
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "feedscout=feedscout.cli:main",
        ],
    },
    python_requires=">=3.9",
)
