from setuptools import setup, find_namespace_packages

setup(
    name='atmfjstc-zip-dump',
    version='1.0.0',

    author_email='atmfjstc@protonmail.com',

    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src', include=['atmfjstc*']),

    install_requires=[
        'colorama>=0.4.6, <2',
        'atmfjstc-binary-utils>=1.2.0, <2',
        'atmfjstc-iso-timestamp>=1.1.0, <2',
        'atmfjstc-os-forensics>=0.2.1, <2',
        'atmfjstc-archive-forensics>=0.4.1, <1',
        'atmfjstc-cli-utils>=1.8, <2',
    ],
    extras_require={
        'test': ['pytest'],
    },

    entry_points={
        'console_scripts': [
            'zipdump=atmfjstc.lib.zip_dump.cli:main',
        ],
    },

    zip_safe=True,

    description="Structural dumper for ZIP archives",

    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Typing :: Typed",
    ],
    python_requires='>=3.7',
)
