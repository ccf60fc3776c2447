from setuptools import setup, find_packages

setup(
    name="vaultmanager",
    version="0.1.0",
    description="Vault Manager backs up an Obsidian vault as a single encrypted archive in a git repository - archiving with tar, encrypting with gpg and pushing with git.",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "vaultmanager=vaultmanager.main:main",
        ],
    },
    python_requires=">=3.8",
)
