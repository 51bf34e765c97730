"""One-shot administrative scripts, run by hand against the service database"""
