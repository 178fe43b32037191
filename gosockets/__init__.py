"""Client-side real-time sync layer for the go-sockets grid game."""
