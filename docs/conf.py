"""
Configuration file for the Sphinx documentation builder.
"""

import os
import sys
import django

# Add project to path
sys.path.insert(0, os.path.abspath('..'))

# Configure Django settings
os.environ['DJANGO_SETTINGS_MODULE'] = 'thread_comments.tests.settings'
django.setup()

# Project information
project = 'Django Thread Comments'
copyright = '2025, Django Thread Comments contributors'
author = 'Django Thread Comments contributors'

# The full version, including alpha/beta/rc tags
import thread_comments
release = thread_comments.__version__

# General configuration
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx.ext.napoleon',
    'sphinx_rtd_theme',
]

templates_path = ['_templates']
exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

# HTML output
html_theme = 'sphinx_rtd_theme'
html_title = 'Django Thread Comments Documentation'

# Extension settings
intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'django': ('https://docs.djangoproject.com/en/stable/', None),
}

# Autodoc settings
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'exclude-members': '__weakref__, __dict__, __module__'
}

# Make sure napoleon works with Google-style docstrings
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_use_param = True
napoleon_use_rtype = True
