# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="pscript",
    version="0.1.0",
    description="A small PostScript-like stack language interpreter",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["pscript", "pscript.*", "pscript_lsp", "pscript_lsp.*"]),
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol>=2023.0.0",
    ],
    extras_require={
        "test": ["pytest>=7", "hypothesis>=6"],
    },
    entry_points={
        "console_scripts": [
            "pscript=pscript.__main__:main",
            "pscript-ls=pscript_lsp.server:main",
            "pscript-repl-server=pscript_lsp.repl_server:main",
        ],
    },
    zip_safe=False,
)
