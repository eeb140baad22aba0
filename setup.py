"""Setup file for iotile-transport-nrfble."""

from setuptools import setup, find_packages
import version

setup(
    name="iotile-transport-nrfble",
    packages=find_packages(exclude=("test", "test.*")),
    version=version.version,
    license="LGPLv3",
    install_requires=[
        "iotile-core>=5.0.0,<6",
        "entrypoints>=0.3.0,<1",
        "pyserial>=3.4.0,<4",
        "typing_extensions>=3.7"
    ],
    extras_require={
        'test': ["pytest>=5"]
    },
    python_requires=">=3.7,<4",
    entry_points={'iotile.config_variables': ['nrfble = iotile_transport_nrfble.config_variables:get_variables']},
    description="IOTile nRF5 BLE Adapter Discovery",
    author="Arch",
    author_email="info@arch-iot.com",
    url="http://github.com/iotile/coretools",
    keywords=["iotile", "arch", "embedded", "hardware", "bluetooth"],
    classifiers=[
        "Programming Language :: Python",
        "Development Status :: 5 - Production/Stable",
        "License :: OSI Approved :: GNU Library or Lesser General Public License (LGPL)",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Topic :: Software Development :: Libraries :: Python Modules"
        ],
    long_description="""\
IOTile nRF5 BLE Adapter Discovery
---------------------------------

A python package that finds nRF5 development kits attached to this computer,
binds each one to the right pc-ble-driver generation and keeps an event driven
list of the adapters that are currently present.  See https://www.arch-iot.com.
"""
)
