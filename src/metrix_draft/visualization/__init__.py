"""Plotly visualization of the draft wheel."""
