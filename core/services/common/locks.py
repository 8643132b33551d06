import threading

# held by scenario promotion across validate-and-apply and by live allocation
# writes, so a promotion never validates against a total that changes under it
PLANNING_WRITE_LOCK = threading.RLock()
