from setuptools import setup, find_packages

with open("requirements.txt") as f:
    required = f.read().splitlines()

setup(
    name="gopkg",
    version="0.1.0",
    packages=find_packages("src"),
    package_dir={"": "src"},
    install_requires=required,
    extras_require={"test": ["pytest"]},
    python_requires=">=3.10",
    entry_points={"console_scripts": ["gopkg = gopkg.cli:main"]},
    description="Vendor git dependencies of a go workspace into a flat src/ layout",
)
