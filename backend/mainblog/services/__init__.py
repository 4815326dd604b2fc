"""
Main Blog Backend — Services Layer
====================================

Service Inventory:
    - AuthService: registration and login (bcrypt)
    - BlogService: blog CRUD, listing and title search
    - FileService: writing and cleaning up uploaded images
"""
