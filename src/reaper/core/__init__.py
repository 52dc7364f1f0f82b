"""Process state, ports and the error hierarchy."""
