#!/usr/bin/env python
"""
Setup configuration for django-thread-comments package.
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="django-thread-comments",
    version="1.0.0",
    description="Comment threads for any Django model with a permission policy, soft delete, voting and subscriber notifications",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Environment :: Web Environment",
        "Framework :: Django",
        "Framework :: Django :: 4.2",
        "Framework :: Django :: 5.0",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords=["django", "comments", "threads", "rest-framework", "api", "voting", "notifications"],
    packages=find_packages(exclude=["docs", "docs.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "Django>=4.2",
        "djangorestframework>=3.14.0",
        "django-filter>=23.0",
        "bleach>=6.0.0",
    ],
    extras_require={
        'test': [
            'pytest>=7.4.0',
            'pytest-django>=4.7.0',
            'factory-boy>=3.3.0',
            'Faker>=20.0.0',
        ],
        'dev': [
            # Testing
            'pytest>=7.4.0',
            'pytest-django>=4.7.0',
            'pytest-cov>=4.1.0',
            'factory-boy>=3.3.0',
            'Faker>=20.0.0',
            # Code Quality
            'ruff>=0.1.0',
            'django-stubs>=4.2.0',
            'djangorestframework-stubs>=3.14.0',
            # Documentation
            'sphinx>=7.0.0',
            'sphinx-rtd-theme>=1.3.0',
        ],
    },
    zip_safe=False,
)
