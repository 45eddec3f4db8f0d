from setuptools import setup, find_packages

setup(
    name='inkwell-templates',
    version='0.1.0',
    py_modules=['inkwell', 'compiler'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.9',
    install_requires=[
        'lark',
        'pydantic>=2',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'inkwell = inkwell:main',
        ],
    },
)
