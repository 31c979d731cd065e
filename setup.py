from setuptools import setup, find_packages

setup(
    name="ui-scout",
    version="1.0.0",
    description="Web UI feature discovery, test synthesis and execution over Playwright or Puppeteer",
    author="Marcos Remar",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "playwright>=1.40.0",
        "python-dotenv>=1.0.0",
        "structlog>=23.0.0",
    ],
    extras_require={
        "puppeteer": [
            "pyppeteer>=1.0.2",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
        "all": [
            "pyppeteer>=1.0.2",
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ui-scout=ui_scout.cli:main",
        ],
    },
)
