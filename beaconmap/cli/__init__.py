"""Command line runners for beaconmap."""
