"""Services for the BridgeYou forum API"""
