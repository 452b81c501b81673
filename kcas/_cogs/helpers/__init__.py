"""
General-purpose helpers not related to the library itself
(neither to the updating routines nor to the clients nor to the structs),
which are used to prepare and control the runtime environment.

These are things that should better be in the standard library
or in the dependencies.

As a rule of thumb, helpers MUST be abstracted from the library
to such an extent that they could be extracted as reusable libraries.
If they implement concepts of the library, they are not "helpers"
(consider making them _kits, structs, clients, or the actions).
"""
