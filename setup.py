#################################################################################
# WaterTAP Copyright (c) 2020-2026, The Regents of the University of California,
# through Lawrence Berkeley National Laboratory, Oak Ridge National Laboratory,
# National Laboratory of the Rockies, and National Energy Technology
# Laboratory (subject to receipt of any required approvals from the U.S. Dept.
# of Energy). All rights reserved.
#
# Please see the files COPYRIGHT.md and LICENSE.md for full copyright and license
# information, respectively. These files are also available online at the URL
# "https://github.com/watertap-org/watertap/"
#################################################################################
"""
Project setup with setuptools
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
from pathlib import Path

cwd = Path(__file__).parent
long_description = (cwd / "README.md").read_text()


setup(
    name="adm1sim",
    version="0.1.dev0",
    description="ADM1 anaerobic digester simulator",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="BSD",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Operating System :: MacOS",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: Unix",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Scientific/Engineering :: Chemistry",
        "Programming Language :: Python :: 3 :: Only",
    ],
    keywords="anaerobic digestion, ADM1, BSM2, wastewater, process modeling",
    # just include adm1sim and everything under it
    packages=find_packages(
        include=("adm1sim*",),
    ),
    python_requires=">=3.9",
    install_requires=[
        # configuration blocks and logging
        "idaes-pse >=2.7.0",
        "pyomo>=6.6.1",
        # integration and root finding
        "numpy",
        "scipy",
        # command line
        "click",
    ],
    extras_require={
        "testing": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "adm1sim = adm1sim.adm1sim_cli:cli",
        ],
    },
)
