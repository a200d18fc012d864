"""Flask web app for the PC shop catalog."""
