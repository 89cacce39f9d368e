"""HTTP gateway for the flute hole calculator."""
