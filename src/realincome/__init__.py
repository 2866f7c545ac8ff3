"""Take-home income calculator for independent contractors."""
