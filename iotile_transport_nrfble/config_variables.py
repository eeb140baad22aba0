"""Canonical list of config variables defined by iotile-transport-nrfble."""


def get_variables():
    """Get a dictionary of configuration variables."""

    prefix = "nrfble"

    conf_vars = []
    conf_vars.append(["update-interval", "float", "Seconds between checks for newly attached or removed adapters", 2.0])
    conf_vars.append(["enumeration-driver", "string", "Driver generation (v2 or v3) used to list attached devices",
                      "v2"])

    return prefix, conf_vars
