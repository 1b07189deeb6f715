from setuptools import find_packages, setup

setup(
    name="review-bot",
    version="0.1.0",
    license="Apache License 2.0",

    python_requires=">=3.11",
    description="Pull request review bot: lgtm/approve labels, branch "
                "freezes and owner based merge gating.",

    packages=find_packages(exclude=('tests',)),
    package_data={'reviewbot': ['test/fixtures/*/*']},

    install_requires=[
        "Click>=8.0,<9.0",
        "toml>=0.10.0,<0.11.0",
        "PyGithub>=2.1,<3.0",
        "python-gitlab>=4.0,<6.0",
        "requests>=2.28,<3.0",
        "ruamel.yaml>=0.17.22,<0.19.0",
        "pydantic>=2.0,<3.0",
        "prometheus-client>=0.17,<1.0",
        "sentry-sdk>=1.30,<3.0",
    ],

    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-mock>=3.10",
            "pytest-httpserver>=1.0",
        ],
    },

    test_suite="reviewbot.test",

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
    ],
    entry_points={
        'console_scripts': [
            'review-bot = reviewbot.cli:root',
        ],
    },
)
