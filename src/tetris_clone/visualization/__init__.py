"""pygame front end: renderer and the human-play loop."""
