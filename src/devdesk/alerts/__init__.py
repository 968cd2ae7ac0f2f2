"""Concrete notification sink, desktop channel, alarm tone and markdown renderer."""
