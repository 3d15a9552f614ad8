"""Desktop frontend: tkinter screens and Pillow board rendering."""
