from setuptools import setup, find_packages

setup(
    name="saoripng",
    version="0.1.0",
    description="SAORI/1.0 plugin for image type probing and resizing to PNG",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "Pillow>=10.1",
        "python-dotenv>=1.0.0",
        "rich>=13.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "saori_png=saoripng.main:saori_png",
        ],
    },
    python_requires=">=3.10",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
