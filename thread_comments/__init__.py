"""
Django Thread Comments
======================

A reusable Django app that attaches permission-checked comment threads to any model.
"""

__version__ = '1.0.0'
