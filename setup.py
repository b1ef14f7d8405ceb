from setuptools import setup, find_packages

setup(
    name='freshtime',
    version='0.3.0',
    description='A CLI tool for tracking time and invoicing clients in FreshBooks.',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'requests',
        'tabulate',
        'python-dotenv',
        'markdown',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'freshtime=freshtime.__main__:main',
        ],
    },
    include_package_data=True,
    package_data={
        '': ['freshtime.env.example'],
    },
    python_requires='>=3.8',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
