import setuptools

# Read the contents of your README file
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Classify the emotion of a text by embedding similarity."

setuptools.setup(
    # --- Essential Arguments ---
    name="emotion-embed",
    version="0.1.0",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    # --- Dependencies ---
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "numpy",
        "openai>=1.0",  # Default embedding provider
        "torch",  # Device detection for the local backend
        "transformers",  # Local feature-extraction embedding backend
    ],
    extras_require={
        "tests": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "emotion-embed=main:main",
        ],
    },
    # --- Metadata ---
    description="Embedding-based emotion classifier for short texts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    # --- Specify Python Version Compatibility ---
    python_requires=">=3.10",
)
