"""Config-driven SSH command runner for OpenWrt routers."""
