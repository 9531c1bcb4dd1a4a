"""Fabric catalog service: fabric designs and their variants."""
