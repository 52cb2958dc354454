"""customtkinter desktop front-end."""
