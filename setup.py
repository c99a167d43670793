from setuptools import setup, find_packages

setup(
    name="energy_bpm",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["estimate_bpm_cli", "export_samples_cli"],
    install_requires=[
        "numpy",
        "librosa",
        "soundfile",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'estimate-bpm=estimate_bpm_cli:run',
            'export-samples=export_samples_cli:run',
        ],
    },
    python_requires='>=3.8',
    description="Offline BPM estimation with a windowed energy-variance beat detector",
    author="Energy BPM",
)
