# setup.py
from setuptools import setup, find_packages
from pathlib import Path
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="hybridocr",
    version="1.0.0",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["hybridocr", "hybridocr.*"]),
    author="Phuoc Nguyen",
    description="PDF text extraction that falls back to OCR for scanned pages.",
    long_description=long_description,
    long_description_content_type='text/markdown',
    python_requires=">=3.8",

    install_requires=[
        "PyMuPDF",
        "pytesseract",
        "tqdm",
        "Pillow",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'hybridocr=hybridocr.cli:main',
        ],
    },
)
