"""Piano academy data layer.

Repositories and stores over three interchangeable backends (an in-process
mock dataset, a REST API and Firestore), selected once through
:class:`Pianoacademy.config.DataConfig`.
"""

__version__ = "0.1.0"
