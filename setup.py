# setup.py
from setuptools import setup, find_packages

setup(
    name="url_hasher",
    version="0.1.0",
    description="Concurrent URL fetcher that reports the MD5 digest of every response body",
    packages=find_packages(include=["url_hasher", "url_hasher.*"]),
    install_requires=[
        "aiohttp>=3.10",
        "click>=8.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "url-hasher=url_hasher.cli:main",
        ],
    },
    python_requires=">=3.11",
)
