"""Setup configuration for ticketscore"""

from setuptools import setup, find_packages

setup(
    name="ticket-score-aggregator",
    version="0.1.0",
    description=(
        "Periodic quality scores for support-ticket ratings, grouped by "
        "category or by agent."
    ),
    author="Ticket Score Aggregator Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "ticket-score-report=ticketscore.main:main",
        ],
    },
)
