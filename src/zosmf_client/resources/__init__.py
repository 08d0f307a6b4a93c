"""Resource modules for the z/OSMF REST services.

Each module declares the request builders and response models for one
service: data sets, z/OS UNIX files, jobs, system variables and server info.
"""
