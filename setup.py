from setuptools import setup, find_packages

setup(
    name="tonrub",
    version="0.1",
    packages=find_packages(include=['src', 'src.*']),
    install_requires=[
        "pandas>=1.3.0",
        "requests>=2.26.0",
        "python-dotenv>=0.19.0",
        "pytz>=2021.1"
    ],
    extras_require={
        "test": ["pytest>=6.0"]
    },
    entry_points={
        "console_scripts": [
            "tonrub=src.cli:main"
        ]
    },
)
