"""Install ambulance accounts package."""

from setuptools import setup, find_packages

setup(
    name='ambulance-accounts',
    version='0.1.0',
    packages=[f'ambulance.{package}' for package
              in find_packages('./ambulance', exclude=['*test*'])],
    install_requires=[
        "sqlalchemy>=2.0",
        "argon2-cffi",
        "redis",
        "python-json-logger",
        "click",
    ],
    extras_require={
        'test': [
            "pytest",
            "hypothesis",
            "mimesis",
        ],
    },
    entry_points={
        'console_scripts': [
            'create-site-admin=ambulance.accounts.bootstrap:create_site_admin',
        ],
    },
    zip_safe=False
)
