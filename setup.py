# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="gluaunpack",
    version="1.0.0",
    description="Unpacks gluapack-packed Garry's Mod addons back into their original Lua files",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["gluaunpack", "gluaunpack.*"]),
    package_data={"gluaunpack.interface": ["locales/*.json"]},
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'gluaunpack=gluaunpack.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
