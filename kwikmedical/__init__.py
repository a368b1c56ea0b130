"""Django project package for the KwikMedical dispatch backend."""
