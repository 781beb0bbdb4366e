# FolioDesk feature modules
