"""Virtual Try-On studio: put an outfit photo onto a person photo with Gemini."""

__version__ = "1.0.0"
