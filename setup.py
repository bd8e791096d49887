# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="hearth",
    version="0.1.0",
    description="Build automation tool: resolve a target from a project manifest and run it",
    packages=find_namespace_packages(where="src", include=["hearth", "hearth.*"]),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "PyYAML",  # Manifest documents
        "rich",    # Styled console output
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'hearth=hearth.main:run',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
