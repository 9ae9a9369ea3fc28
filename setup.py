from setuptools import setup, find_packages
import os

install_requires = ["lark>=1.1", "pydantic>=2.9"]

# Define optional dependencies for development
extras_require = {"dev": ["pytest"]}

setup(
    name="ycalc",
    version="0.3.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "ycalc = ycalc.cli:main",
        ],
    },
    include_package_data=True,
    package_data={"ycalc.parser": ["*.lark"]},
    description="A typed arithmetic and boolean expression engine: lexer, parser and evaluator.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
