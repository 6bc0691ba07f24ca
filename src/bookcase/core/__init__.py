# ABOUTME: Core pipelines: field normalization, duplicate resolution, import, export, restore.
# ABOUTME: Also hosts manual book editing and library statistics.
