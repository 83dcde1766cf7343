"""Standard attribute key names used for registry graphs and feature properties.

Using consistent keys keeps the registry, the splitter and the feature loaders in agreement.
"""

# Key for storing the ProjectionDescriptor on a registry graph node
DEFAULT_DESCRIPTOR_KEY = "descriptor"

# Key for storing the point transform function on a registry graph edge
DEFAULT_TRANSFORM_KEY = "fn"

# Key for storing the hub code in graph.graph
DEFAULT_HUB_KEY = "hub"

# Feature property treated as the identity of a feature
DEFAULT_ID_KEY = "id"
