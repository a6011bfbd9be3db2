"""Static regulatory data for the MKBD calculator."""
