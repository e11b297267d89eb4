"""wgmesh command line interface."""
