"""Ports - interfaces between the user registry core and the outside."""
