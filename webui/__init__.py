"""HTTP status endpoint for BGP Node Status"""
