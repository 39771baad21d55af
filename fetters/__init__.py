"""fetters: track job applications, sprints and interview stages from the terminal."""

__version__ = "0.5.0"
