from setuptools import find_namespace_packages, setup

setup(
    name="gem-layout",
    version="0.1.0",
    description="GEM force-directed graph layout with adaptive per-vertex temperatures",
    python_requires=">=3.10",
    py_modules=["main"],
    packages=find_namespace_packages(
        include=["core*", "geometry*", "parameters*", "runtime*"]
    ),
    install_requires=["numpy", "PyYAML"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["gem-layout=main:main"]},
)
