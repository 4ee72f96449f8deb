from setuptools import setup, find_packages

setup(
    name="mesh-harmonics",
    version="0.1.0",
    description="Manifold harmonics of polygon meshes: Laplacians, vibration modes, modal synthesis and analysis",
    author="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["mesh_harmonics"],
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "trimesh",
        "matplotlib",
        "tqdm",
        "networkx",
        "svgwrite",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "mesh-harmonics=mesh_harmonics:main",
        ],
    },
)
