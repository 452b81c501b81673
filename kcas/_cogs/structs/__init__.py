"""
All the structures to describe the objects, their identities, and credentials.

All the functions here are purely data-manipulative and computational.
No external calls or any i/o activities are done here.
"""
