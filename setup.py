from setuptools import setup, find_packages

setup(
    name="usdx-parser",
    version="0.1.0",
    description="Parse UltraStar Deluxe (USDX) karaoke song files into validated, immutable song objects",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"usdx_parser": ["py.typed"]},
    install_requires=[
        "regex",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "usdx-parser=usdx_parser.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Text Processing",
    ],
    keywords="ultrastar usdx karaoke parser lyrics notes duet",
)
