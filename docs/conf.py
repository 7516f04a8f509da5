# Sphinx configuration for the Workflow Designer API reference

import os
import sys

sys.path.insert(0, os.path.abspath('../src'))

from workflow_designer import __version__  # noqa: E402

project = 'Workflow Designer'
copyright = '2026, Workflow Designer contributors'
author = 'Workflow Designer contributors'
version = release = __version__

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

root_doc = 'index'
exclude_patterns = ['_build']

html_theme = 'sphinx_rtd_theme'
html_title = f'Workflow Designer {release}'

# Pydantic internals would otherwise show up on every model page.
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'undoc-members': True,
    'exclude-members': 'model_config,model_fields,model_computed_fields',
}
autodoc_typehints = 'description'

napoleon_google_docstring = True
napoleon_numpy_docstring = False

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'pydantic': ('https://docs.pydantic.dev/latest', None),
    'fastapi': ('https://fastapi.tiangolo.com', None),
}
