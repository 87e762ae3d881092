"""Records UPI payment notifications as expenses and serves them over HTTP."""
